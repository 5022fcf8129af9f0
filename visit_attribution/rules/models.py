from pydantic import BaseModel, Field, field_validator


class StorageRules(BaseModel):
    key: str = Field(min_length=1)
    ttl_days: int = Field(gt=0)
    path: str = "/"
    same_site: str = "Lax"

    @field_validator("same_site")
    @classmethod
    def check_same_site(cls, value: str) -> str:
        if value not in ("Strict", "Lax", "None"):
            raise ValueError("same_site must be one of Strict, Lax, None")
        return value

class KnownSourceRule(BaseModel):
    domain: str = Field(min_length=1)
    source: str = Field(min_length=1)
    medium: str = Field(min_length=1)

class ClickIdRuleModel(BaseModel):
    param: str = Field(min_length=1)
    source: str = Field(min_length=1)
    medium: str = Field(min_length=1)

class ReferrerRules(BaseModel):
    instagram_lite_marker: str = "l.instagram.com"
    google_search_marker: str = "google.com/search"
    referral_medium: str = "referral"

class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class Rules(BaseModel):
    project: ProjectRules
    storage: StorageRules
    known_sources: list[KnownSourceRule]
    click_ids: list[ClickIdRuleModel]
    referrer: ReferrerRules = Field(default_factory=ReferrerRules)

    @field_validator("known_sources")
    @classmethod
    def check_unique_domains(cls, value: list[KnownSourceRule]) -> list[KnownSourceRule]:
        domains = [entry.domain for entry in value]
        if len(domains) != len(set(domains)):
            raise ValueError("known_sources domains must be unique")
        return value
