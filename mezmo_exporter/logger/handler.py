from logging import Formatter
from logging import Handler as LoggingHandler

from pydantic import BaseModel


class Handler(BaseModel):
    handler: LoggingHandler
    formatter: Formatter | None = None

    model_config = {"arbitrary_types_allowed": True}
