# app/schemas/webhook_schema.py

from pydantic import BaseModel, ConfigDict, Field


# Entity as sent by the automation workflow; unknown attributes are ignored
class WebhookEntity(BaseModel):
    entity_id: str = Field(..., alias="_id")
    entity_schema: str = Field(..., alias="_schema")
    energietraeger: str | None = None
    inbetriebnahme: str | None = None
    leistung_kw: float | str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WebhookData(BaseModel):
    entity: WebhookEntity
    resume_token: str
    callback_post_url: str


# Main model for the request body
class WebhookPayload(BaseModel):
    data: WebhookData


class WebhookResult(BaseModel):
    success: bool
    error: str | None = None
