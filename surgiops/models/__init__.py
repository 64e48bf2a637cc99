"""
SurgiOps
SQLAlchemy extension instance shared by every model module.

Usage:
    from surgiops.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
