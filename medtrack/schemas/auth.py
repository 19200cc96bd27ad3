from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr = Field(examples=["pharmacist@example.com"])
    password: str = Field(min_length=8, max_length=128, examples=["Pass123!"])
    full_name: str = Field(default="", max_length=150, examples=["Asha Rao"])
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "pharmacist@example.com",
                "password": "Pass123!",
                "full_name": "Asha Rao",
            }
        }
    )


class TokenResponse(BaseModel):
    access_token: str = Field(examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])
    token_type: str = "bearer"
