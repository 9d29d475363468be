"""PATCH bodies refuse explicit nulls for NOT NULL columns"""
import pytest
from pydantic import ValidationError

from app.schemas.listings import InstagramUpdate, ModelUpdate, TelegramUpdate
from app.schemas.media import MediaPackUpdate
from app.schemas.profiles import ProfileUpdate
from app.schemas.templates import FunnelTemplateUpdate


@pytest.mark.parametrize("schema,field", [
    (InstagramUpdate, "posts_count"),
    (TelegramUpdate, "group_name"),
    (ModelUpdate, "name"),
    (MediaPackUpdate, "min_plan"),
    (FunnelTemplateUpdate, "nodes"),
    (ProfileUpdate, "onboarding_completed"),
])
def test_null_rejected(schema, field):
    with pytest.raises(ValidationError, match=f"{field} cannot be null"):
        schema.model_validate({field: None})


def test_omitted_fields_stay_unset():
    data = FunnelTemplateUpdate.model_validate({"description": None})
    assert data.model_dump(exclude_unset=True) == {"description": None}


def test_nullable_columns_accept_null():
    data = TelegramUpdate.model_validate({"group_username": None, "niche": None})
    assert data.group_username is None and data.niche is None
