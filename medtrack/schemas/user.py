from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from medtrack.models.enums import Role


class UserMeResponse(BaseModel):
    id: str
    email: EmailStr = Field(examples=["admin@example.com"])
    full_name: str
    roles: list[Role]
    primary_role: Role | None
    role_label: str = Field(examples=["Admin"])
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b5e4c1e-3a55-4d0f-9a39-1f2f0c6c8a10",
                "email": "admin@example.com",
                "full_name": "Admin",
                "roles": ["admin"],
                "primary_role": "admin",
                "role_label": "Admin",
            }
        }
    )


class UserWithRolesResponse(BaseModel):
    id: str
    email: EmailStr
    full_name: str
    roles: list[Role]
    created_at: datetime


class UserListResponse(BaseModel):
    items: list[UserWithRolesResponse]
    total: int


class RoleAssignRequest(BaseModel):
    # Kept as a plain string so unknown values reach the role parser and fail as InvalidRole
    role: str = Field(examples=["pharmacist"])


class RolesResponse(BaseModel):
    user_id: str
    roles: list[Role]


class NavigationItemResponse(BaseModel):
    path: str
    label: str
    required_roles: list[Role]
