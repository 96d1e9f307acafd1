"""
Placement Portal
Backend for students, recruiters and the training & placement office.

Architecture:
- MongoDB: accounts (one collection per role), opportunities, applications
- JWT: stateless 7 day bearer tokens carrying id, role and email
- Asset host: resumes on local disk or S3
"""

__version__ = "1.0.0"
