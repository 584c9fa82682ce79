from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from .db import Base


class Author(Base):
    __tablename__ = "author"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)


class Category(Base):
    __tablename__ = "category"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)


# table and column keep the legacy "dificulty" spelling of the schema
class Difficulty(Base):
    __tablename__ = "dificulty"
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)


class Recipe(Base):
    __tablename__ = "recipe"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    author_id = Column(Integer, ForeignKey("author.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("category.id"), nullable=False)
    dificulty_id = Column(Integer, ForeignKey("dificulty.id"), nullable=False)
    rating = Column(Float, nullable=False, default=0, server_default="0")
    preparation_time = Column(Integer, nullable=False, default=0)
    serving = Column(String(200), nullable=False, default="")
    ingredients = Column(Text, nullable=False, default="")  # "|"-delimited
    steps = Column(Text, nullable=False, default="")  # "|"-delimited
    access_count = Column(Integer, nullable=False, default=0, server_default="0")
    image = Column(Text, nullable=False, default="")
    published_date = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
