from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

POOL_DETAIL_TEMPLATE = "PoolDetailPage"


class PageParams(BaseModel):
    filename: str


class MarkdownPage(BaseModel):
    """Page descriptor derived from a markdown file's frontmatter.

    Frontmatter keys the table does not use are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    template: Optional[str] = None
    params: PageParams
    member_since: Any = Field(default=None, alias="memberSince")
    identities: Any = None

    @property
    def is_pool_page(self) -> bool:
        return self.template == POOL_DETAIL_TEMPLATE
