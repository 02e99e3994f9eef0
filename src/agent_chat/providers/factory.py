"""Settings-bound client construction for a given agent configuration."""

from agent_chat.config.settings import Settings
from agent_chat.interfaces import ILLMClient
from agent_chat.providers.resolver import ProviderKind, build_client, is_local_model, resolve_provider


class LLMClientFactory:
    """
    Resolves the provider for a model and builds its client with the
    configured credentials and endpoints.

    The local runtime only serves local models, so a model that falls
    through to LOCAL by default is replaced with ``settings.ollama_model``.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _secret(self, kind: ProviderKind) -> str | None:
        if kind is ProviderKind.OPENAI and self.settings.openai_api_key:
            return self.settings.openai_api_key.get_secret_value()
        if kind is ProviderKind.GROQ and self.settings.groq_api_key:
            return self.settings.groq_api_key.get_secret_value()
        return None

    def _base_url(self, kind: ProviderKind) -> str | None:
        if kind is ProviderKind.GROQ:
            return self.settings.groq_base_url
        if kind is ProviderKind.LOCAL:
            return self.settings.ollama_base_url
        return None

    def create(
        self,
        model: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ILLMClient:
        """
        Raises:
            MissingCredential: the resolved provider has no API key
        """
        kind = resolve_provider(model)
        if kind is ProviderKind.LOCAL and not is_local_model(model):
            model = self.settings.ollama_model

        return build_client(
            kind,
            model,
            api_key=self._secret(kind),
            base_url=self._base_url(kind),
            temperature=temperature,
            max_tokens=max_tokens,
        )
