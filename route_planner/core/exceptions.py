# route_planner/core/exceptions.py


class RoutePlannerError(Exception):
    """
    Base error carrying the HTTP status the API layer should answer with.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class InvalidInputError(RoutePlannerError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code=status_code)


class RoutingError(RoutePlannerError):
    """Any routing outcome that did not produce a route."""


class RouteNotFoundError(RoutingError):
    def __init__(self, message: str = "No route found", status_code: int = 404) -> None:
        super().__init__(message, status_code=status_code)


class UpstreamServiceError(RoutePlannerError):
    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code)
