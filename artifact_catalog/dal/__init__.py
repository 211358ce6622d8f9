from . import artifact_dal, category_dal

__all__ = ["artifact_dal", "category_dal"]
