"""FastAPI application exposing masking and number formatting."""

import logging
import re
from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from ..config.settings import get_settings
from ..core.exceptions import InputMaskingError
from ..core.interfaces import Literal, MaskResult, MaskToken, ObfuscatedPattern, Pattern
from ..core.matcher import match_mask
from ..core.session import currency_options
from ..processors.currency import abbreviate_number, format_money_as_object, format_number, unformat
from ..processors.masks import (
    apply_phone_mask,
    compile_date_mask,
    compile_number_mask,
    compile_phone_mask,
)

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Input Masking API",
    description="API for masking user input and formatting numbers and amounts",
    version="0.1.0",
)
logger.info("Input masking API initialized")


def _check_length(value: Any) -> Any:
    if isinstance(value, str) and len(value) > settings.max_value_length:
        raise ValueError(f"value exceeds {settings.max_value_length} characters")
    return value


BoundedStr = Annotated[str, AfterValidator(_check_length)]
Scalar = Annotated[Union[float, str, None], AfterValidator(_check_length)]


# Request/Response models
class MaskTokenModel(BaseModel):
    """One mask token: either a literal or a pattern."""

    literal: Optional[str] = Field(None, min_length=1, max_length=1)
    pattern: Optional[str] = Field(None, description="Regex tested against one character")
    obfuscate: bool = False
    marker: Optional[str] = Field(None, max_length=1)
    placeholder: Optional[str] = Field(None, max_length=1)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        """Reject patterns that do not compile."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid pattern: {e}")
        return v

    @model_validator(mode="after")
    def validate_kind(self) -> "MaskTokenModel":
        """Require exactly one of literal or pattern."""
        if (self.literal is None) == (self.pattern is None):
            raise ValueError("exactly one of 'literal' or 'pattern' is required")
        return self

    def to_token(self) -> MaskToken:
        if self.literal is not None:
            return Literal(self.literal)
        if self.obfuscate:
            return ObfuscatedPattern(self.pattern, self.marker, self.placeholder)
        return Pattern(self.pattern, self.placeholder)


class MaskRequest(BaseModel):
    """Request model for the generic masking endpoint."""

    value: BoundedStr = Field("", description="Raw input value")
    mask: List[MaskTokenModel] = Field(..., description="Mask tokens")
    obfuscation_character: Optional[str] = Field(None, max_length=1)
    auto_complete: bool = False


class PhoneMaskRequest(BaseModel):
    """Request model for phone masking."""

    value: BoundedStr = ""
    country: str = Field(..., min_length=1, description="Country code or example number")
    auto_complete: bool = False


class NumberMaskRequest(BaseModel):
    """Request model for number masking."""

    value: BoundedStr = ""
    precision: int = Field(2, ge=0, le=9)
    delimiter: Optional[str] = None
    separator: Optional[str] = None
    prefix: List[str] = Field(default_factory=list)


class DateMaskRequest(BaseModel):
    """Request model for date masking."""

    value: BoundedStr = ""
    separator: str = Field("/", min_length=1, max_length=1)
    auto_complete: bool = False


class MaskResponse(BaseModel):
    """Response model for masking endpoints."""

    masked: str
    unmasked: str
    obfuscated: str
    has_obfuscation: bool
    placeholder: str
    is_valid: bool


class NumberRequest(BaseModel):
    """Request model for number formatting."""

    value: Scalar = None
    decimal_digits: Optional[int] = Field(None, ge=0)
    thousand_separator: Optional[str] = None
    decimal_separator: Optional[str] = None


class MoneyRequest(NumberRequest):
    """Request model for money formatting."""

    symbol: Optional[str] = None
    format: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="ISO 4217 code")


class MoneyResponse(BaseModel):
    """Response model for money formatting."""

    result: str
    formatted_number: str
    used_format: str
    value: float
    symbol: str
    decimal_digits: int
    thousand_separator: str
    decimal_separator: str
    format: str


class UnformatRequest(BaseModel):
    """Request model for unformatting."""

    value: Scalar = None
    decimal_separator: Optional[str] = None


def _mask_response(result: MaskResult) -> MaskResponse:
    return MaskResponse(
        masked=result.masked,
        unmasked=result.unmasked,
        obfuscated=result.obfuscated,
        has_obfuscation=result.has_obfuscation,
        placeholder=result.placeholder,
        is_valid=result.is_valid,
    )


# Health check endpoint
@app.get("/")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "input-masking-api"}


@app.post("/mask", response_model=MaskResponse)
async def mask_value(request: MaskRequest) -> MaskResponse:
    """Match a value against an explicit mask."""
    tokens = [token.to_token() for token in request.mask]
    result = match_mask(
        request.value, tokens, request.obfuscation_character, request.auto_complete
    )
    return _mask_response(result)


@app.post("/mask/phone", response_model=MaskResponse)
async def mask_phone(request: PhoneMaskRequest) -> MaskResponse:
    """Mask a phone number for a country or example number."""
    phone_mask = compile_phone_mask(request.country)
    if not phone_mask.mask:
        raise HTTPException(status_code=400, detail=f"unknown country: {request.country}")
    return _mask_response(
        apply_phone_mask(phone_mask, request.value, auto_complete=request.auto_complete)
    )


@app.post("/mask/number", response_model=MaskResponse)
async def mask_number(request: NumberMaskRequest) -> MaskResponse:
    """Mask a number with grouping and decimal separators."""
    mask = compile_number_mask(
        request.delimiter, request.precision, request.prefix, request.separator
    )
    return _mask_response(match_mask(request.value, mask))


@app.post("/mask/date", response_model=MaskResponse)
async def mask_date(request: DateMaskRequest) -> MaskResponse:
    """Mask a DD/MM/YYYY date."""
    mask = compile_date_mask(request.separator)
    return _mask_response(match_mask(request.value, mask, auto_complete=request.auto_complete))


@app.post("/format/number")
async def format_number_endpoint(request: NumberRequest) -> Dict[str, str]:
    """Format a number with grouped thousands."""
    result = format_number(
        request.value,
        request.decimal_digits,
        request.thousand_separator,
        request.decimal_separator,
    )
    return {"result": result}


@app.post("/format/money", response_model=MoneyResponse)
async def format_money_endpoint(request: MoneyRequest) -> MoneyResponse:
    """Format an amount through a currency template."""
    symbol_or_options: Any = request.symbol
    if request.currency:
        options = currency_options(request.currency)
        if request.symbol is not None:
            options.symbol = request.symbol
        symbol_or_options = options
    money = format_money_as_object(
        request.value,
        symbol_or_options,
        request.decimal_digits,
        request.thousand_separator,
        request.decimal_separator,
        request.format,
    )
    return MoneyResponse(
        result=money.result,
        formatted_number=money.formatted_number,
        used_format=money.used_format,
        value=money.value,
        symbol=money.symbol,
        decimal_digits=money.decimal_digits,
        thousand_separator=money.thousand_separator,
        decimal_separator=money.decimal_separator,
        format=money.format,
    )


@app.post("/unformat")
async def unformat_endpoint(request: UnformatRequest) -> Dict[str, float]:
    """Parse a formatted amount back into a number."""
    return {"value": unformat(request.value, request.decimal_separator)}


@app.post("/abbreviate")
async def abbreviate_endpoint(request: UnformatRequest) -> Dict[str, str]:
    """Abbreviate a number with K/M/B/T suffixes."""
    return {"result": abbreviate_number(unformat(request.value, request.decimal_separator))}


# Error handlers
@app.exception_handler(InputMaskingError)
async def input_masking_error_handler(request: Request, exc: InputMaskingError) -> JSONResponse:
    """Handle configuration and currency errors."""
    logger.error(f"Input masking error: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)},
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Any) -> JSONResponse:
    """Handle internal server errors."""
    logger.error(f"Internal error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("input_masking.api.main:app", host=settings.api_host, port=settings.api_port)
