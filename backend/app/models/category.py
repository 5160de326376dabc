"""分类模型"""
from sqlalchemy import Column, String, DateTime

from app.models.base import Base, utcnow


class Category(Base):
    """漫画分类表"""
    __tablename__ = "categories"

    category_id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    code = Column(String(10), nullable=False)  # 展示用短标记，不保证唯一
    icon = Column(String(50), nullable=True)
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Category {self.category_id}>"
