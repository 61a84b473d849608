"""Post routes.

Both post kinds expose the same five endpoints; the routes only lift the
path, header and body into a ``PostRequest`` and serialize what the handler
returns.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, status
from fastapi.responses import JSONResponse

from postboard.routes.dependencies import get_bearer_credential, get_post_handler, get_request_correlation_id
from postboard.schemas.envelope import CollectionEnvelope, ErrorEnvelope, ResourceEnvelope
from postboard.schemas.post import PostKind, PostOperation
from postboard.services.posts import PostRequest, PostRequestHandler, PostResponse

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope},
    401: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    503: {"model": ErrorEnvelope},
}


def _render(response: PostResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body())


def build_post_router(kind: PostKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.resource_type}", tags=[kind.resource_type])

    @router.get(
        "",
        response_model=CollectionEnvelope,
        responses=_ERROR_RESPONSES,
        name=f"list_{kind.value}_posts",
    )
    async def list_posts(
        credential: Annotated[str | None, Depends(get_bearer_credential)],
        correlation_id: Annotated[str, Depends(get_request_correlation_id)],
        handler: Annotated[PostRequestHandler, Depends(get_post_handler)],
    ) -> JSONResponse:
        return _render(
            handler.handle(
                PostRequest(
                    kind=kind,
                    operation=PostOperation.LIST,
                    credential=credential,
                    correlation_id=correlation_id,
                )
            )
        )

    @router.post(
        "",
        response_model=ResourceEnvelope,
        status_code=status.HTTP_201_CREATED,
        responses=_ERROR_RESPONSES,
        name=f"create_{kind.value}_post",
    )
    async def create_post(
        credential: Annotated[str | None, Depends(get_bearer_credential)],
        correlation_id: Annotated[str, Depends(get_request_correlation_id)],
        handler: Annotated[PostRequestHandler, Depends(get_post_handler)],
        payload: Annotated[Any, Body()] = None,
    ) -> JSONResponse:
        return _render(
            handler.handle(
                PostRequest(
                    kind=kind,
                    operation=PostOperation.CREATE,
                    credential=credential,
                    payload=payload,
                    correlation_id=correlation_id,
                )
            )
        )

    @router.get(
        "/{postId}",
        response_model=ResourceEnvelope,
        responses=_ERROR_RESPONSES,
        name=f"get_{kind.value}_post",
    )
    async def get_post(
        post_id: Annotated[str, Path(alias="postId")],
        credential: Annotated[str | None, Depends(get_bearer_credential)],
        correlation_id: Annotated[str, Depends(get_request_correlation_id)],
        handler: Annotated[PostRequestHandler, Depends(get_post_handler)],
    ) -> JSONResponse:
        return _render(
            handler.handle(
                PostRequest(
                    kind=kind,
                    operation=PostOperation.READ,
                    credential=credential,
                    post_id=post_id,
                    correlation_id=correlation_id,
                )
            )
        )

    @router.patch(
        "/{postId}",
        response_model=ResourceEnvelope,
        responses=_ERROR_RESPONSES,
        name=f"update_{kind.value}_post",
    )
    @router.put(
        "/{postId}",
        response_model=ResourceEnvelope,
        responses=_ERROR_RESPONSES,
        name=f"replace_{kind.value}_post",
    )
    async def update_post(
        post_id: Annotated[str, Path(alias="postId")],
        credential: Annotated[str | None, Depends(get_bearer_credential)],
        correlation_id: Annotated[str, Depends(get_request_correlation_id)],
        handler: Annotated[PostRequestHandler, Depends(get_post_handler)],
        payload: Annotated[Any, Body()] = None,
    ) -> JSONResponse:
        return _render(
            handler.handle(
                PostRequest(
                    kind=kind,
                    operation=PostOperation.UPDATE,
                    credential=credential,
                    payload=payload,
                    post_id=post_id,
                    correlation_id=correlation_id,
                )
            )
        )

    @router.delete(
        "/{postId}",
        response_model=ResourceEnvelope,
        responses=_ERROR_RESPONSES,
        name=f"delete_{kind.value}_post",
    )
    async def delete_post(
        post_id: Annotated[str, Path(alias="postId")],
        credential: Annotated[str | None, Depends(get_bearer_credential)],
        correlation_id: Annotated[str, Depends(get_request_correlation_id)],
        handler: Annotated[PostRequestHandler, Depends(get_post_handler)],
    ) -> JSONResponse:
        return _render(
            handler.handle(
                PostRequest(
                    kind=kind,
                    operation=PostOperation.DELETE,
                    credential=credential,
                    post_id=post_id,
                    correlation_id=correlation_id,
                )
            )
        )

    return router


public_posts_router = build_post_router(PostKind.PUBLIC)
private_posts_router = build_post_router(PostKind.PRIVATE)
