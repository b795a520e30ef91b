from humanizer.models.entities import ParagraphEntity

__all__ = ["ParagraphEntity"]
