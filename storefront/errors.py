"""
Taxonomie des erreurs de la boutique.
- Chaque erreur porte son code HTTP; les handlers (app_setup.exception_handlers)
  les transforment en réponses JSON {"error": ...} ou texte pour le webhook.
"""
from typing import Any, Dict, Optional


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.detail:
            body["message"] = self.detail
        return body


class InvalidCartError(StorefrontError):
    """Panier absent, vide ou mal formé (erreur client)."""
    status_code = 400


class PaymentProviderError(StorefrontError):
    """Échec de l'appel Stripe; detail contient le message du fournisseur."""
    status_code = 500


class SignatureVerificationError(StorefrontError):
    """Webhook non signé, signature invalide ou en-tête mal formé."""
    status_code = 400


class SoldOutError(StorefrontError):
    status_code = 409


class ConfigurationError(StorefrontError):
    """Secret requis manquant: fatal au démarrage."""
