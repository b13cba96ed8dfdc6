"""Category endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from library_service.api.v1.errors import http_error, set_paging_headers
from library_service.application.commands import (
    CreateCategoryCommand,
    CreateCategoryHandler,
    DeleteCategoryCommand,
    DeleteCategoryHandler,
    UpdateCategoryCommand,
    UpdateCategoryHandler,
)
from library_service.application.dto import CategoryDTO
from library_service.application.queries import (
    CountCategoriesHandler,
    CountCategoriesQuery,
    GetAllCategoriesHandler,
    GetAllCategoriesQuery,
    GetCategoryByIdHandler,
    GetCategoryByIdQuery,
)
from library_service.core.dependencies import (
    AuthUser,
    ClientIP,
    SuperUser,
    get_all_categories_handler,
    get_category_by_id_handler,
    get_count_categories_handler,
    get_create_category_handler,
    get_delete_category_handler,
    get_update_category_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.category import CategoryRequest
from library_service.schemas.common import CountResponse, MessageResponse

router = APIRouter(prefix="/category", tags=["category"])


@router.get("", response_model=List[CategoryDTO])
async def list_categories(
    response: Response,
    user: AuthUser,
    search_term: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetAllCategoriesHandler = Depends(get_all_categories_handler),
) -> List[CategoryDTO]:
    """
    List categories.

    sort_by is "name" (default) or "created"; paging metadata is
    returned in the X-Total-Count, X-Page-Number and X-Page-Size headers.
    """
    try:
        result = await handler.handle(
            GetAllCategoriesQuery(
                search_term=search_term,
                sort_by=sort_by,
                sort_order=sort_order,
                page_number=page_number,
                page_size=page_size,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/count", response_model=CountResponse)
async def count_categories(
    user: AuthUser,
    search_term: Optional[str] = None,
    handler: CountCategoriesHandler = Depends(get_count_categories_handler),
) -> CountResponse:
    count = await handler.handle(CountCategoriesQuery(search_term=search_term))
    return CountResponse(count=count)


@router.get("/{category_id}", response_model=CategoryDTO)
async def get_category(
    category_id: str,
    user: AuthUser,
    handler: GetCategoryByIdHandler = Depends(get_category_by_id_handler),
) -> CategoryDTO:
    try:
        return await handler.handle(GetCategoryByIdQuery(category_id=category_id))
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("", response_model=CategoryDTO, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: CreateCategoryHandler = Depends(get_create_category_handler),
) -> CategoryDTO:
    try:
        return await handler.handle(
            CreateCategoryCommand(
                actor_id=admin.user_id,
                category_name=request.category_name,
                description=request.description,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/{category_id}", response_model=CategoryDTO)
async def update_category(
    category_id: str,
    request: CategoryRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: UpdateCategoryHandler = Depends(get_update_category_handler),
) -> CategoryDTO:
    try:
        return await handler.handle(
            UpdateCategoryCommand(
                actor_id=admin.user_id,
                category_id=category_id,
                category_name=request.category_name,
                description=request.description,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: DeleteCategoryHandler = Depends(get_delete_category_handler),
) -> MessageResponse:
    try:
        await handler.handle(
            DeleteCategoryCommand(actor_id=admin.user_id, category_id=category_id, ip_address=client_ip)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message="Category deleted successfully")
