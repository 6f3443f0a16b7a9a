from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Template URLs shipped in example configs; a source pointing at one is disabled
PLACEHOLDER_URLS = frozenset({
    "https://example.com/feed1.xml",
    "https://example.com/feed2.xml",
})


class RewriteRule(BaseModel):
    """
    Literal substring replacement, e.g. a mirror domain -> canonical domain.
    """
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(min_length=1)
    replacement: str

    @model_validator(mode="after")
    def _check_idempotent(self):
        # Applying the rule a second time must be a no-op
        if self.pattern in self.replacement:
            raise ValueError(
                f"replacement {self.replacement!r} contains pattern {self.pattern!r}"
            )
        return self

    def apply(self, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        return value.replace(self.pattern, self.replacement)


class SourceConfig(BaseModel):
    """
    One configured feed source plus its per-source text rules.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: Optional[str] = None
    name: str
    category: str = "General"
    min_date: Optional[datetime] = Field(None, alias="minDate")
    link_rewrite: Optional[RewriteRule] = Field(None, alias="linkRewrite")
    title_suffix: Optional[str] = Field(None, alias="titleSuffix")

    @property
    def enabled(self) -> bool:
        url = (self.url or "").strip()
        return bool(url) and url not in PLACEHOLDER_URLS
