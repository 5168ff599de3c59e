"""Pydantic schemas for the BinDay Operations API."""

from app.schemas.auth import *
from app.schemas.client import *
from app.schemas.job import *
from app.schemas.log import *
from app.schemas.property_request import *
from app.schemas.proof_preference import *
from app.schemas.portal import *
from app.schemas.route import *
