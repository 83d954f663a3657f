from riskscope.api_server import app

__all__ = ["app"]
