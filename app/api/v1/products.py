import logging
from fastapi import APIRouter, HTTPException, status
from app.schemas.product import ProductRequest, ProductResponse
from app.schemas.response import SuccessResponse
from app.services.order_service import create_product, get_product

log = logging.getLogger("uvicorn")

router = APIRouter()


def _to_response(product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        sku=product.sku,
        is_active=product.is_active,
        will_sync=bool((product.sku or "").strip()),
    )


@router.get("/{product_id}", response_model=SuccessResponse)
async def get_product_endpoint(product_id: int):
    """Fetches a product and whether its SKU makes it syncable."""
    product = await get_product(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    return SuccessResponse(data=_to_response(product).model_dump())


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_product_endpoint(product_data: ProductRequest):
    """
    Creates a product. A product without a SKU is accepted but will never be
    part of a sync payload; the response says so.
    """
    try:
        product = await create_product(
            name=product_data.name,
            sku=product_data.sku,
            is_active=product_data.is_active
        )
    except Exception as e:
        log.error(f"Error creating product: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error processing request: {e}"
        )

    data = _to_response(product)
    message = None if data.will_sync else "This product has no SKU and will not be synced."
    return SuccessResponse(message=message, data=data.model_dump())
