"""
Owner profile endpoints: the signed-in owner's profile and listings, and public owner profiles.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.owner import OwnerService
from rentals_api.schemas.owner import OwnerUpdate, OwnerResponse, OwnerPublicResponse
from rentals_api.schemas.property import PropertySummaryResponse
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import get_owner_service, get_current_owner


router = APIRouter(prefix="/owners", tags=["Owners"])


@router.get(
    "/me",
    response_model=OwnerResponse,
    status_code=status.HTTP_200_OK,
    summary="Get own profile",
    responses=error_responses(401, 403)
)
async def get_my_profile(
    account: AuthenticatedAccount = Depends(get_current_owner)
) -> OwnerResponse:
    return OwnerResponse.model_validate(account.account.to_dict())


@router.put(
    "/me",
    response_model=OwnerResponse,
    status_code=status.HTTP_200_OK,
    summary="Update own profile",
    description="Replace the editable profile fields. The full name is required; omitted optional fields are cleared.",
    responses=error_responses(401, 403, 422)
)
async def update_my_profile(
    profile_data: OwnerUpdate,
    account: AuthenticatedAccount = Depends(get_current_owner),
    owner_service: OwnerService = Depends(get_owner_service)
) -> OwnerResponse:
    owner = await owner_service.update_profile(account.account, profile_data)
    return OwnerResponse.model_validate(owner.to_dict())


@router.get(
    "/me/properties",
    response_model=List[PropertySummaryResponse],
    status_code=status.HTTP_200_OK,
    summary="List own properties",
    description="Every listing of the signed-in owner, pending ones included",
    responses=error_responses(401, 403)
)
async def list_my_properties(
    account: AuthenticatedAccount = Depends(get_current_owner),
    owner_service: OwnerService = Depends(get_owner_service)
) -> List[PropertySummaryResponse]:
    properties = await owner_service.list_own_properties(account.account)
    return [PropertySummaryResponse.model_validate(prop.to_summary_dict()) for prop in properties]


@router.get(
    "/{owner_id}",
    response_model=OwnerPublicResponse,
    status_code=status.HTTP_200_OK,
    summary="Get owner public profile",
    responses=error_responses(401, 404)
)
async def get_owner_profile(
    owner_id: str = Path(..., min_length=1, max_length=50, description="Owner ID"),
    owner_service: OwnerService = Depends(get_owner_service)
) -> OwnerPublicResponse:
    """
    Public contact data of an owner.

    Raises:
        NotFoundError: If the owner does not exist
        InactiveAccountError: If the owner was deactivated
    """
    owner = await owner_service.get_public_profile(owner_id)
    return OwnerPublicResponse.model_validate(owner.to_public_dict())
