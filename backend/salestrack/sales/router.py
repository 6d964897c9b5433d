from fastapi import APIRouter, Depends

from ..auth.gate import require_client, require_manager
from ..auth.service import get_user_directory
from ..auth.stores import UserDirectory
from ..models.Staff import ClientIdentity, StaffResponse, StaffRole, StoreResponse

router = APIRouter(prefix="/api/v1/sales", tags=["sales"])


@router.get("/stores", response_model=list[StoreResponse])
async def read_my_stores(
    current_user: ClientIdentity = Depends(require_client),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    List the stores the calling staff member belongs to.
    """
    return [
        StoreResponse(store_id=store.store_id, store_name=store.store_name)
        for store in directory.stores_for_user(current_user.id)
    ]


@router.get("/staff", response_model=list[StaffResponse])
async def read_staff(
    current_user: ClientIdentity = Depends(require_manager),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    List the staff of the manager's stores (Manager only).
    """
    # Store scope comes from the signed token, not the request
    return [
        StaffResponse(
            user_id=user.user_id,
            user_name=user.user_name,
            role=StaffRole.from_code(user.role_id),
            store_ids=store_ids,
        )
        for user, store_ids in directory.staff_for_stores(current_user.store_ids)
    ]
