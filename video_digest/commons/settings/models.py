"""Pydantic settings models for application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "video-digest"
    version: str = "0.1.0"
    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = ""
    docs_enabled: bool = True


class BucketSettings(BaseModel):
    """Bucket name configuration."""

    audio: str = "youtube-audio"


class BlobStorageSettings(BaseModel):
    """Blob storage settings (MinIO/S3)."""

    provider: Literal["minio", "s3"] = "minio"
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str = "us-east-1"
    buckets: BucketSettings = Field(default_factory=BucketSettings)


class YouTubeSettings(BaseModel):
    """Source audio resolution settings (yt-dlp)."""

    cookies_file: str | None = None
    cookies_from_browser: str | None = None
    proxy: str | None = None
    rate_limit: str | None = None
    audio_format: str = "bestaudio/best"
    socket_timeout_seconds: int = 30


class TranscriptionSettings(BaseModel):
    """Transcription service settings."""

    provider: Literal["openai_whisper"] = "openai_whisper"
    api_key: str = ""
    endpoint: str | None = None
    model: str = "whisper-1"
    language: str | None = None
    word_timestamps: bool = True
    timeout_seconds: int = 300


class LLMSettings(BaseModel):
    """LLM service settings used for transcript summarization."""

    provider: Literal["openai", "azure_openai", "anthropic", "google"] = "openai"
    api_key: str = ""
    endpoint: str | None = None
    model: str = "gpt-4o"
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = 4096
    timeout_seconds: int = 120


class VideoModelSettings(BaseModel):
    """Video-capable model used to summarize a source directly."""

    provider: Literal["google"] = "google"
    api_key: str = ""
    model: str = "gemini-2.5-flash"


class SummarizationSettings(BaseModel):
    """Prompting options shared by both summarization pipelines."""

    output_language: str = "English"
    video: VideoModelSettings = Field(default_factory=VideoModelSettings)


class SpeechSettings(BaseModel):
    """Text-to-speech settings."""

    provider: Literal["openai"] = "openai"
    api_key: str = ""
    endpoint: str | None = None
    model: str = "tts-1"
    voice: str = "alloy"
    speed: float = Field(default=1.25, ge=0.25, le=4.0)
    response_format: Literal["mp3"] = "mp3"


class RetrySettings(BaseModel):
    """Backoff policy for unreliable collaborator calls."""

    max_attempts: int = Field(default=5, ge=1)
    initial_delay_seconds: float = Field(default=1.0, ge=0)
    max_jitter_seconds: float = Field(default=0.5, ge=0)
    retryable_status_codes: list[int] = Field(default_factory=lambda: [503, 429, 408])


class JobSettings(BaseModel):
    """Job lifecycle settings."""

    grace_seconds: float = Field(default=5.0, ge=0)
    temp_object_prefix: str = "youtube_audio_"


class TelemetrySettings(BaseModel):
    """Telemetry and observability settings."""

    enabled: bool = True
    log_format: Literal["json", "text"] = "json"
    log_level: str = "INFO"


class LangfuseSettings(BaseModel):
    """Langfuse LLM tracing settings."""

    enabled: bool = False
    public_key: str = ""
    secret_key: str = ""
    host: str = "https://cloud.langfuse.com"
    debug: bool = False
    sample_rate: float = Field(default=1.0, ge=0, le=1)
    flush_at: int = 15
    flush_interval: float = 0.5


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    transcription: TranscriptionSettings = Field(default_factory=TranscriptionSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    summarization: SummarizationSettings = Field(default_factory=SummarizationSettings)
    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    jobs: JobSettings = Field(default_factory=JobSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    langfuse: LangfuseSettings = Field(default_factory=LangfuseSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VIDEO_DIGEST__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
