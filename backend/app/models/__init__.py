"""模型包初始化"""
from app.models.base import Base
from app.models.category import Category
from app.models.comic import Comic

__all__ = [
    "Base",
    "Category",
    "Comic",
]
