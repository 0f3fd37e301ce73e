class GrepError(Exception):
    """所有可恢复错误的基类，由 GrepHost 捕获并提示用户"""


class NoActiveDocumentError(GrepError):
    def __init__(self, message: str = "No active editor found"):
        super().__init__(message)


class MissingNameError(GrepError):
    def __init__(self, message: str = "No setting selected"):
        super().__init__(message)


class ConfigNotFoundError(GrepError):
    def __init__(self, name: str):
        super().__init__(f"No settings found for '{name}'")
        self.name = name


class MalformedImportError(GrepError):
    """导入的JSON无法解析或缺少必需字段"""
