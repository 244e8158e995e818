"""
Project DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from dashboard_api.modules.deployments.schemas import DeploymentResponse


class CreateProjectDto(BaseModel):
    """DTO for creating a project together with its staging deployment"""

    name: str = Field(..., description="Project name, 1 to 100 characters")
    logo: Optional[str] = Field(None, description="Base64-encoded PNG logo")
    methods: List[str] = Field(..., description="Enabled auth methods, e.g. ['email', 'google_oauth']")

    class Config:
        from_attributes = True


class CreateProductionDeploymentDto(BaseModel):
    """DTO for promoting a project to production on a custom domain"""

    custom_domain: str = Field(..., description="Apex domain, e.g. example.com")
    auth_methods: List[str]

    class Config:
        from_attributes = True


class ProjectWithDeploymentsResponse(BaseModel):
    """Response model for Project entity with its live deployments"""

    id: int
    name: str
    image_url: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    deployments: List[DeploymentResponse]

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    data: List[ProjectWithDeploymentsResponse]
    has_more: bool

    class Config:
        from_attributes = True
