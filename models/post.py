from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Post(BaseModel, Base):
    __tablename__ = "posts"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    # Owner id. Deliberately not a foreign key: an interrupted user cascade may
    # leave posts whose owner no longer exists.
    sender = Column(String(36), nullable=False, index=True)

    # Deletion is done explicitly (see utils.cascade), never through the ORM.
    comments = relationship(
        "Comment",
        back_populates="post",
        order_by="Comment.created_at",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Post {self.id} by {self.sender}>"
