"""
Routes simples (hors routers).
- /: vérification de vie en texte brut.
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs.
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from starlette.status import HTTP_204_NO_CONTENT

LIVENESS_TEXT = "Storefront checkout backend is running."

def register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    def root():
        return LIVENESS_TEXT

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
