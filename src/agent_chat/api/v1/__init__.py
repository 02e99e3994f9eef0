from agent_chat.api.v1.router import router

__all__ = ["router"]
