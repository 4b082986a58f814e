"""SMS scheduling and dispatch errors"""


class SmsError(Exception):
    """Base class for SMS subsystem errors"""


class InvalidScheduleConfig(SmsError):
    """No offset entry for a (product type, schedule type) pair"""

    def __init__(self, product_type: str, schedule_type: str):
        self.product_type = product_type
        self.schedule_type = schedule_type
        super().__init__(f"Invalid schedule config: {product_type}/{schedule_type}")


class ReservationNotFound(SmsError):
    """Job's reservation was deleted before dispatch"""


class TemplateNotFound(SmsError):
    """No message template for a (product type, schedule type) pair"""

    def __init__(self, product_type: str, schedule_type: str):
        self.product_type = product_type
        self.schedule_type = schedule_type
        super().__init__(f"No template for {product_type}/{schedule_type}")


class GatewayFailure(SmsError):
    """Network error, non-2xx or malformed response from the SMS gateway"""

    def __init__(self, message: str, response=None):
        self.response = response
        super().__init__(message)


class InvalidStatusTransition(SmsError):
    """Attempted a status change the job lifecycle does not allow"""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move schedule from {current} to {target}")
