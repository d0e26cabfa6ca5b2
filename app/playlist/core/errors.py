"""
异常模块
定义播放列表获取与解析过程中的错误类型
"""


class PlaylistError(Exception):
    """所有播放列表相关错误的基类"""


class NetworkError(PlaylistError):
    """网络错误：超时、连接失败、非 2xx 状态码或空响应体"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class FetchCancelledError(NetworkError):
    """请求被取消，不参与重试"""

    def __init__(self, message: str = "Fetch cancelled"):
        super().__init__(message)


class PlaylistFormatError(PlaylistError):
    """单行格式错误（无效的 #EXTINF 行、没有元数据的 URL）"""

    def __init__(self, line_number: int, reason: str):
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class EntityValidationError(PlaylistError):
    """构建出的条目缺少必填字段"""


class CredentialError(PlaylistError):
    """凭据或 URL 无效，在任何网络请求之前被拒绝"""
