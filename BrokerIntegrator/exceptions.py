from typing import List, Optional


class BaseClientException(Exception):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)


class ApiError(BaseClientException):
    """The server answered with a non-2xx status; never retried"""

    def __init__(self, message: str, status_code: int, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors

    def __repr__(self):
        return f"ApiError(message={self.message!r}, status_code={self.status_code}, errors={self.errors!r})"


class NetworkError(BaseClientException):
    """The request never completed, even after retries"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
