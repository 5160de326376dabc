"""漫画模型

Review note:
- category_id 到 categories 的外键不在建表时声明，由 SchemaManager 单独尽力附加，
  旧库存在孤儿数据时附加失败也不影响使用。
- (title, category_id) 唯一约束是批量导入 upsert 的冲突键。
"""
from sqlalchemy import Column, String, Text, DateTime, JSON, UniqueConstraint

from app.models.base import Base, utcnow


class Comic(Base):
    """漫画条目表"""
    __tablename__ = "comics"

    comic_id = Column(String(100), primary_key=True)
    title = Column(String(500), nullable=False)
    category_id = Column(String(50), nullable=False, index=True)
    subcategory = Column(String(100), nullable=True, default="")
    chapter = Column(String(50), nullable=True)  # 自由文本进度，"0" 表示未开始
    rating = Column(String(20), nullable=False, default="none", server_default="none")
    tags = Column(JSON(none_as_null=True), nullable=False, default=list)  # 有序字符串列表
    description = Column(Text, nullable=True, default="")
    last_updated = Column(DateTime, default=utcnow, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("title", "category_id", name="uq_comics_title_category"),
    )

    def __repr__(self):
        return f"<Comic {self.title}>"
