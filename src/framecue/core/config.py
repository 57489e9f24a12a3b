"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class AwsConfig(BaseSettings):
    """Shared AWS client configuration."""

    model_config = {"env_prefix": "FRAMECUE_AWS_"}

    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class SigningConfig(BaseSettings):
    """Signed request client configuration."""

    model_config = {"env_prefix": "FRAMECUE_SIGNING_"}

    access_key: str | None = None  # falls back to the boto3 credential chain
    secret_key: str | None = None
    session_token: str | None = None
    provider_domain: str = "amazonaws.com"
    default_content_type: str = "application/x-amz-json-1.1"
    default_accept_type: str = "application/json"
    timeout: float = 30.0


class CorrelationConfig(BaseSettings):
    """Pending operation (service token) store configuration."""

    model_config = {"env_prefix": "FRAMECUE_CORRELATION_"}

    backend: Literal["dynamodb", "redis", "memory"] = "dynamodb"
    table_name: str = "framecue-service-token"
    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    ttl_seconds: int = 7 * 24 * 3600
    key_prefix: str = "framecue:token:"


class RedisConfig(BaseSettings):
    """Redis correlation backend configuration."""

    model_config = {"env_prefix": "FRAMECUE_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0


class StepFunctionsConfig(BaseSettings):
    """Orchestrator (Step Functions) configuration."""

    model_config = {"env_prefix": "FRAMECUE_STEPFUNCTIONS_"}

    endpoint_url: str | None = None


class TranscodeConfig(BaseSettings):
    """Transcode (MediaConvert) job submission configuration."""

    model_config = {"env_prefix": "FRAMECUE_TRANSCODE_"}

    endpoint: str = ""  # account-specific MediaConvert endpoint URL
    role_arn: str = ""


class AnalysisConfig(BaseSettings):
    """Video analysis job submission configuration."""

    model_config = {"env_prefix": "FRAMECUE_ANALYSIS_"}

    solution_uuid: str = "framecue"
    topic_arn: str = ""
    topic_role_arn: str = ""
    min_segment_confidence: float = 80.0


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "FRAMECUE_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    aws: AwsConfig = AwsConfig()
    signing: SigningConfig = SigningConfig()
    correlation: CorrelationConfig = CorrelationConfig()
    redis: RedisConfig = RedisConfig()
    stepfunctions: StepFunctionsConfig = StepFunctionsConfig()
    transcode: TranscodeConfig = TranscodeConfig()
    analysis: AnalysisConfig = AnalysisConfig()
