from pydantic import BaseModel, Field, model_validator


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class ListingProfileRules(BaseModel):
    search_fields: list[str]
    filters: list[str]
    sort_fields: dict[str, str]
    default_sort: str

    @model_validator(mode="after")
    def _default_sort_allowed(self) -> "ListingProfileRules":
        if self.default_sort not in self.sort_fields:
            raise ValueError(f"default_sort '{self.default_sort}' is not in sort_fields")
        return self


class ListingRules(BaseModel):
    default_limit: int = 10
    max_limit: int = 100
    max_page: int = 100_000
    search_max_length: int = 100
    category_max_length: int = 50
    author_max_length: int = 100
    max_tags: int = 10
    tag_max_length: int = 50
    profiles: dict[str, ListingProfileRules]


class SchedulerRules(BaseModel):
    enabled: bool = True
    interval_seconds: float = Field(default=60.0, gt=0)
    db_timeout_seconds: float = Field(default=10.0, gt=0)


class ContentRules(BaseModel):
    max_tags: int = 10
    tag_max_length: int = 50
    slug_pattern: str = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class UploadKindRules(BaseModel):
    mime_prefixes: list[str]
    max_bytes: int
    key_prefix: str


class AuthRules(BaseModel):
    token_ttl_minutes: int = 240
    password_min_length: int = 8


class LoginRateLimit(BaseModel):
    window_seconds: int
    max_attempts: int | None = None


class UploadRateLimit(BaseModel):
    window_seconds: int
    max_requests: int | None = None


class RateLimitRules(BaseModel):
    login: LoginRateLimit
    upload: UploadRateLimit


class CorsRules(BaseModel):
    origins: list[str] = Field(default_factory=list)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    data_dir_required: bool = True


class Rules(BaseModel):
    project: ProjectRules
    listing: ListingRules
    scheduler: SchedulerRules
    content: ContentRules
    uploads: dict[str, UploadKindRules]
    auth: AuthRules
    rate_limits: RateLimitRules
    cors: CorsRules
    ops: OpsRules
