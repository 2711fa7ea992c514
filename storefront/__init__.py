"""Backend de la boutique: panier -> session Stripe Checkout, webhooks signés."""
