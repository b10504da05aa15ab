"""
api/routes/books.py -- Book catalog REST endpoints.

Routes:
  GET    /api/books          -- list all books (public)
  GET    /api/books/{id}     -- book detail (public)
  POST   /api/books          -- create a book (bearer token)
  PUT    /api/books/{id}     -- partial update (bearer token)
  DELETE /api/books/{id}     -- delete, returns the deleted book (bearer token)

Mutating routes declare Depends(require_token): the dependency runs before
the handler body, so a request without a valid token never reaches the
store. NotFoundError and ValidationError raised by the store and the rule
check are mapped to 404/400 by api/main.py.
"""

from fastapi import APIRouter, Depends, Request

from api.models import BookCreate, BookResponse, BookUpdate
from auth.dependencies import require_token
from catalog.models import Book
from catalog.rules import check_book
from catalog.store import BookStore

router = APIRouter()


@router.get("/books", response_model=list[BookResponse])
def list_books(request: Request) -> list[BookResponse]:
    store: BookStore = request.app.state.books
    return [_book_to_response(b) for b in store.list_books()]


@router.get("/books/{book_id}", response_model=BookResponse)
def get_book(request: Request, book_id: int) -> BookResponse:
    store: BookStore = request.app.state.books
    return _book_to_response(store.get_book(book_id))


@router.post(
    "/books",
    response_model=BookResponse,
    status_code=201,
    dependencies=[Depends(require_token)],
)
def create_book(request: Request, body: BookCreate) -> BookResponse:
    """Add a book to the catalog. in_stock defaults to true when omitted."""
    store: BookStore = request.app.state.books
    fields = check_book(body.model_dump())
    book_id = store.create_book(Book(**fields))
    return _book_to_response(store.get_book(book_id))


@router.put(
    "/books/{book_id}",
    response_model=BookResponse,
    dependencies=[Depends(require_token)],
)
def update_book(request: Request, book_id: int, body: BookUpdate) -> BookResponse:
    """Change the supplied fields of a book; omitted fields keep their value."""
    store: BookStore = request.app.state.books
    fields = check_book(body.model_dump(exclude_unset=True), partial=True)
    if not fields:
        # Nothing to change -- still 404 for an unknown id.
        return _book_to_response(store.get_book(book_id))
    return _book_to_response(store.update_book(book_id, **fields))


@router.delete(
    "/books/{book_id}",
    response_model=BookResponse,
    dependencies=[Depends(require_token)],
)
def delete_book(request: Request, book_id: int) -> BookResponse:
    store: BookStore = request.app.state.books
    return _book_to_response(store.delete_book(book_id))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _book_to_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        title=book.title,
        author=book.author,
        genre=book.genre,
        price=book.price,
        in_stock=book.in_stock,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )
