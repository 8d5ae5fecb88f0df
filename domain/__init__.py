"""Describes the deepdish frontend domain. Centres around the backend DTOs.

Why is this thin?

- The backend owns recipes and ingredients. We only read them and create
  ingredients.
- What we do own is the boundary: nothing reaches a template unless it
  matched its DTO exactly.
- Absence (a 404, a dead backend) is normal and becomes `None`.
- A malformed payload is not normal and raises.
"""
