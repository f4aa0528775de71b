from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class IncomingMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender_id: int
    chat_id: int
    text: str
    timestamp: datetime

class ExpenseRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(min_length=1) # lower-cased member of the CategorySet
    description: str = Field(min_length=1)
    payment_mode: str
    amount: float = Field(gt=0, allow_inf_nan=False)

class SubmissionSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    formatted_category: str
    description: str
    formatted_payment_mode: str
    amount: float
    sheet_label: str

class SubmissionFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str | None = None

SubmissionResult = Union[SubmissionSuccess, SubmissionFailure]
