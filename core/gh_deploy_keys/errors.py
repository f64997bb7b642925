"""Deploy key API errors"""

from typing import Optional


class DeployKeyError(Exception):
    """Error talking to the GitHub deploy keys API

    ``status_code`` is set when GitHub answered with an unexpected status,
    ``detail`` holds GitHub's error message when the response carried one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None
    ):
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class GetKeyError(DeployKeyError):
    """Listing deploy keys failed"""
    pass


class DeleteKeyError(DeployKeyError):
    """Deleting a deploy key failed"""

    def __init__(
        self,
        message: str,
        key_id: int,
        status_code: Optional[int] = None,
        detail: Optional[str] = None
    ):
        super().__init__(message, status_code=status_code, detail=detail)
        self.key_id = key_id


class CreateKeyError(DeployKeyError):
    """Creating a deploy key failed"""
    pass
