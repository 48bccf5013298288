class DomainException(Exception):
    pass


class UnsupportedOrderTypeError(DomainException):
    def __init__(self, order_type):
        self.order_type = order_type
        super().__init__(f"No module order gateway registered for {order_type}")


class ModuleSyncError(DomainException):
    def __init__(self, order_no: str, action: str, cause: Exception):
        self.order_no = order_no
        self.action = action
        self.cause = cause
        super().__init__(f"Module order sync '{action}' failed for {order_no}: {cause}")
