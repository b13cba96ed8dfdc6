"""Book catalog endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from library_service.api.v1.errors import http_error, set_paging_headers
from library_service.application.commands import (
    CreateBookCommand,
    CreateBookHandler,
    DeleteBookCommand,
    DeleteBookHandler,
    UpdateBookCommand,
    UpdateBookHandler,
)
from library_service.application.dto import BookDTO, BookListItemDTO
from library_service.application.queries import (
    CountAvailableBooksHandler,
    CountAvailableBooksQuery,
    CountBooksByCategoryHandler,
    CountBooksByCategoryQuery,
    CountBooksHandler,
    CountBooksQuery,
    GetAllBooksHandler,
    GetAllBooksQuery,
    GetAvailableBooksHandler,
    GetAvailableBooksQuery,
    GetBookByIdHandler,
    GetBookByIdQuery,
    GetBooksByCategoryHandler,
    GetBooksByCategoryQuery,
)
from library_service.core.dependencies import (
    AuthUser,
    ClientIP,
    SuperUser,
    get_all_books_handler,
    get_available_books_handler,
    get_book_by_id_handler,
    get_books_by_category_handler,
    get_count_available_books_handler,
    get_count_books_by_category_handler,
    get_count_books_handler,
    get_create_book_handler,
    get_delete_book_handler,
    get_update_book_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.book import BookRequest
from library_service.schemas.common import CountResponse, MessageResponse

router = APIRouter(prefix="/book", tags=["book"])


@router.get("", response_model=List[BookListItemDTO])
async def list_books(
    response: Response,
    user: AuthUser,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    title: Optional[str] = None,
    author: Optional[str] = None,
    category_id: Optional[str] = None,
    available_only: bool = False,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetAllBooksHandler = Depends(get_all_books_handler),
) -> List[BookListItemDTO]:
    """
    Search the catalog.

    sort_by: title, author, category, year, available or publisher.
    Paging metadata is returned in X-Total-Count, X-Page-Number and
    X-Page-Size headers.
    """
    try:
        result = await handler.handle(
            GetAllBooksQuery(
                sort_by=sort_by,
                sort_order=sort_order,
                title=title,
                author=author,
                category_id=category_id,
                available_only=available_only,
                page_number=page_number,
                page_size=page_size,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/available", response_model=List[BookListItemDTO])
async def list_available_books(
    response: Response,
    user: AuthUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetAvailableBooksHandler = Depends(get_available_books_handler),
) -> List[BookListItemDTO]:
    try:
        result = await handler.handle(GetAvailableBooksQuery(page_number=page_number, page_size=page_size))
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/by-category/{category_id}", response_model=List[BookListItemDTO])
async def list_books_by_category(
    category_id: str,
    response: Response,
    user: AuthUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetBooksByCategoryHandler = Depends(get_books_by_category_handler),
) -> List[BookListItemDTO]:
    try:
        result = await handler.handle(
            GetBooksByCategoryQuery(category_id=category_id, page_number=page_number, page_size=page_size)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/count", response_model=CountResponse)
async def count_books(
    user: AuthUser,
    handler: CountBooksHandler = Depends(get_count_books_handler),
) -> CountResponse:
    return CountResponse(count=await handler.handle(CountBooksQuery()))


@router.get("/count/available", response_model=CountResponse)
async def count_available_books(
    user: AuthUser,
    handler: CountAvailableBooksHandler = Depends(get_count_available_books_handler),
) -> CountResponse:
    return CountResponse(count=await handler.handle(CountAvailableBooksQuery()))


@router.get("/count/by-category/{category_id}", response_model=CountResponse)
async def count_books_by_category(
    category_id: str,
    user: AuthUser,
    handler: CountBooksByCategoryHandler = Depends(get_count_books_by_category_handler),
) -> CountResponse:
    return CountResponse(count=await handler.handle(CountBooksByCategoryQuery(category_id=category_id)))


@router.get("/{book_id}", response_model=BookDTO)
async def get_book(
    book_id: str,
    user: AuthUser,
    handler: GetBookByIdHandler = Depends(get_book_by_id_handler),
) -> BookDTO:
    try:
        return await handler.handle(GetBookByIdQuery(book_id=book_id))
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("", response_model=BookDTO, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: BookRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: CreateBookHandler = Depends(get_create_book_handler),
) -> BookDTO:
    try:
        return await handler.handle(
            CreateBookCommand(actor_id=admin.user_id, ip_address=client_ip, **request.model_dump())
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/{book_id}", response_model=BookDTO)
async def update_book(
    book_id: str,
    request: BookRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: UpdateBookHandler = Depends(get_update_book_handler),
) -> BookDTO:
    try:
        return await handler.handle(
            UpdateBookCommand(
                actor_id=admin.user_id,
                book_id=book_id,
                ip_address=client_ip,
                **request.model_dump(),
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: str,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: DeleteBookHandler = Depends(get_delete_book_handler),
) -> MessageResponse:
    try:
        await handler.handle(DeleteBookCommand(actor_id=admin.user_id, book_id=book_id, ip_address=client_ip))
    except LibraryServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message="Book deleted successfully")
