from pydantic_settings import BaseSettings
from pydantic import Field, HttpUrl, SecretStr, ValidationError
from typing import Optional, Literal
import logging

logger = logging.getLogger(__name__)


class CriticalConfigError(Exception):
    """Custom exception for critical configuration failures."""
    pass


class AppSettings(BaseSettings):
    # Pydantic model configuration
    model_config = {
        'extra': 'ignore',
        'env_file': '.env',
        'env_file_encoding': 'utf-8',
        'validate_default': True,
    }

    # -- Embedding provider selection --
    EMBEDDING_PROVIDER: Literal['ollama', 'openai'] = Field(
        default='ollama',
        description="Which embedding provider to use: ollama or openai."
    )
    EMBEDDING_TIMEOUT: int = Field(
        default=120,
        description="Timeout per embedding request (seconds)."
    )
    EMBEDDING_BATCH_SIZE: int = Field(
        default=16,
        gt=0,
        description="Number of texts to embed in one API call."
    )
    EMBEDDING_CONCURRENCY: int = Field(
        default=1,
        gt=0,
        description="Number of concurrent batch requests. 1 = sequential processing.",
    )
    EMBEDDING_MAX_RETRIES: int = Field(
        default=3,
        gt=0,
        description="Max attempts for failed embedding requests."
    )
    EMBEDDING_RETRY_DELAY: float = Field(
        default=2.0,
        ge=0,
        description="Base delay between embedding retries (seconds), doubled per attempt."
    )
    EMBEDDING_DIMENSIONS: Optional[int] = Field(
        default=None,
        description="Requested output size for providers that support it."
    )

    # Ollama
    OLLAMA_EMBEDDING_BASE_URL: HttpUrl = Field(
        default='http://localhost:11434',
        description='Ollama Embedding base URL.'
    )
    OLLAMA_EMBEDDING_MODEL: str = Field(
        default="all-minilm",
        description="The Ollama embedding model to be used."
    )

    # OpenAI-compatible API
    OPENAI_API_KEY: Optional[SecretStr] = Field(
        default=None,
        description="API key for the OpenAI-compatible embedding endpoint."
    )
    OPENAI_BASE_URL: HttpUrl = Field(
        default='https://api.openai.com/v1',
        description="Base URL of the OpenAI-compatible API."
    )
    OPENAI_EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model."
    )

    # -- Keyword extraction --
    KEYWORD_EXTRACTOR: Literal['spacy', 'none'] = Field(
        default='spacy',
        description="spacy extracts keywords; none embeds the whole query."
    )
    SPACY_MODEL: str = Field("en_core_web_sm", description="spaCy pipeline for keyword extraction.")
    KEYWORD_MAX_TERMS: int = Field(
        default=5,
        gt=0,
        description="Maximum keywords kept per query."
    )

    # -- Query vector --
    QUERY_DECAY_RATE: float = Field(
        default=0.8,
        description="Positional weight decay for keyword embeddings (weight_i = rate ** i)."
    )

    # -- Vector store --
    VECTOR_STORE_PROVIDER: Literal['chroma', 'qdrant'] = Field(
        default='chroma',
        description="Which vector store to use: chroma or qdrant."
    )
    COLLECTION_NAME: str = Field("test", description="Collection holding saved values.")
    DEFAULT_SEARCH_LIMIT: int = Field(10, gt=0, description="Results returned when no limit is given.")

    CHROMA_PERSIST_DIR: Optional[str] = Field("./data/vector_db", description="Chroma storage folder.")

    QDRANT_URL: Optional[HttpUrl] = Field(default=None, description="Qdrant server URL.")
    QDRANT_API_KEY: Optional[SecretStr] = Field(default=None, description="Qdrant Cloud API key.")
    QDRANT_LOCATION: str = Field(":memory:", description="Local Qdrant path when no URL is set.")
    QDRANT_TIMEOUT: Optional[int] = Field(default=30, description="Qdrant request timeout (seconds).")

    # Logging
    LOG_LEVEL: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field("INFO")

    # FastAPI settings
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(3000)
    DEBUG: bool = Field(False)


# Instantiate settings. This will load, validate, and expose the settings.
# Pydantic will raise a ValidationError if required fields are missing or types are wrong.
try:
    settings = AppSettings()
except ValidationError as e:
    error_messages = []
    for error in e.errors():
        field = ".".join(str(loc) for loc in error['loc'])
        message = error['msg']
        error_messages.append(f"  - Field '{field}': {message}")

    full_error_message = "Environment variable validation failed!\n" + "\n".join(error_messages) + \
                         "\nPlease check the logs and your .env file or environment settings."
    logger.error(full_error_message)

    raise CriticalConfigError(full_error_message) from e
