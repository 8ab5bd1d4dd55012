"""SeldonDeployment resource model and naming rules, an in-memory client and listers."""

__version__ = "0.3.2"
__all__ = ["types", "client", "lister"]