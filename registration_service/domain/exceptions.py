"""Ошибки регистрации.

Каждое исключение знает свой HTTP-статус: клиентские ошибки (400) несут
сообщение для пользователя, внутренние (500) - сообщение и исходную причину.
"""


class RegistrationError(Exception):
    status_code = 500


class ClientInputError(RegistrationError):
    status_code = 400


class InvalidPayload(ClientInputError):
    def __init__(self, detail: str):
        super().__init__(f"Invalid request payload: {detail}")


class ValidationFailed(ClientInputError):
    pass


class EmailAlreadyInUse(ClientInputError):
    def __init__(self):
        super().__init__("Email already in use")


class InternalError(RegistrationError):
    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class DependencyUnavailableError(InternalError):
    """Хранилище не сконфигурировано. Детали только в логах."""

    def __init__(self):
        super().__init__("Internal server error")


class StoreError(InternalError):
    pass


class HashingError(InternalError):
    pass


class EncodingError(InternalError):
    pass
