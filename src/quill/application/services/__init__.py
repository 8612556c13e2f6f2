from quill.application.services.client_context import ClientContext
from quill.application.services.command_dispatcher import CommandDispatcher

__all__ = ["ClientContext", "CommandDispatcher"]
