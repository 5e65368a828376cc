class ProvisioningException(Exception):
    def __init__(self, detail):
        super().__init__(detail)
        self.detail = detail

    def __str__(self):
        return str(self.detail)


class ConfigurationError(ProvisioningException):
    pass


class DatabaseConnectionError(ProvisioningException):
    pass


class DuplicateApiKeyError(ProvisioningException):
    pass


class SchemaSyncError(ProvisioningException):
    def __init__(self, detail, returncode: int | None = None, stderr: str = ""):
        super().__init__(detail)
        self.returncode = returncode
        self.stderr = stderr
