from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Comment(BaseModel, Base):
    __tablename__ = "comments"

    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    sender = Column(String(36), nullable=False, index=True)

    post = relationship("Post", back_populates="comments")

    def __repr__(self):
        return f"<Comment {self.id} on {self.post_id}>"
