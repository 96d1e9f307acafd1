"""
MongoDB Service - CRUD operations for the portal collections.

Collections in this database:
1. students       - student accounts and profiles
2. companies      - recruiter accounts
3. tpos           - training & placement officer accounts
4. opportunities  - job postings, each owned by one company
5. applications   - one document per (student, opportunity)

Account collections are split by role, so the same email may exist once
per role. Password hashes are only ever returned by get_by_email(), which
login needs; every other read goes through serialize_doc().
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.core.errors import Conflict, NotFound, ValidationError
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import ApplicationStatus, Role

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS: ObjectId handling and JSON serialization
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a JSON-serializable dict without password."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "password":
            continue
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        else:
            out[key] = value
    return out


def serialize_docs(docs: Iterable[dict]) -> List[dict]:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# ACCOUNTS (credential store)
# ============================================================

class AccountService:
    """
    Shared account storage. Subclasses pick the collection and the default
    profile fields a fresh account starts with.
    """

    collection_name: str = None
    defaults: Dict[str, Any] = {}

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS[self.collection_name])

    def get_by_email(self, email: str) -> Optional[dict]:
        """Raw account document, password hash included (login only)."""
        return self.collection.find_one({"email": email})

    def get_by_id(self, account_id: Any) -> Optional[dict]:
        oid = to_object_id(account_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def create(self, name: str, email: str, password_hash: str) -> dict:
        """
        Insert a new account.

        Raises:
            Conflict: email already registered in this collection
        """
        if self.collection.find_one({"email": email}, {"_id": 1}):
            raise Conflict("Email already registered")

        now = _now()
        doc = {
            **self.defaults,
            "name": name,
            "email": email,
            "password": password_hash,
            "created_at": now,
            "updated_at": now,
        }
        # copy list defaults so accounts never share them
        for key, value in doc.items():
            if isinstance(value, list):
                doc[key] = list(value)
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("Email already registered")
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def list(self, query: dict = None) -> List[dict]:
        return serialize_docs(self.collection.find(query or {}))


class StudentService(AccountService):
    collection_name = "students"
    defaults = {
        "is_verified": False,
        "phone": "",
        "department": "",
        "roll_number": "",
        "semester": "",
        "gpa": "",
        "tenth_percent": "",
        "twelfth_percent": "",
        "active_backlogs": "",
        "skills": [],
        "preferred_roles": [],
        "preferred_locations": [],
        "projects": [],
        "certifications": [],
        "resume_url": "",
        "resume_file_name": "",
    }

    def _update(self, student_id: Any, fields: dict) -> Optional[dict]:
        oid = to_object_id(student_id)
        if oid is None:
            return None
        fields = {**fields, "updated_at": _now()}
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    def update_profile(self, student_id: Any, update: dict) -> Optional[dict]:
        """
        Apply a partial profile update. `update` holds only the fields the
        client sent; full_name maps to name and is ignored when blank, empty
        resume fields are ignored.
        """
        fields = dict(update)
        full_name = fields.pop("full_name", None)
        if isinstance(full_name, str) and full_name.strip():
            fields["name"] = full_name.strip()
        for key in ("resume_url", "resume_file_name"):
            if not fields.get(key):
                fields.pop(key, None)
        return self._update(student_id, fields)

    def set_resume(self, student_id: Any, url: str, file_name: str) -> Optional[dict]:
        return self._update(student_id, {"resume_url": url, "resume_file_name": file_name})

    def verify(self, student_id: Any) -> Optional[dict]:
        """Set the verification flag (TPO action)."""
        return self._update(student_id, {"is_verified": True})

    def list_verified(self) -> List[dict]:
        return self.list({"is_verified": True})


class CompanyService(AccountService):
    collection_name = "companies"


class TpoService(AccountService):
    collection_name = "tpos"


ACCOUNT_SERVICES = {
    Role.student: StudentService,
    Role.recruiter: CompanyService,
    Role.tpo: TpoService,
}


def get_account_service(role: Role) -> AccountService:
    """Account store for a role; every Role has exactly one collection."""
    return ACCOUNT_SERVICES[Role(role)]()


# ============================================================
# OPPORTUNITIES
# ============================================================

class OpportunityService:
    """
    Job postings. Each one has exactly one owning company and only that
    company may change or delete it.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["opportunities"])
        self.companies: Collection = get_collection(COLLECTIONS["companies"])

    def _attach_company_names(self, docs: List[dict]) -> List[dict]:
        """Join company name onto each posting (one query for the batch)."""
        ids = list({doc["company"] for doc in docs if doc.get("company")})
        names = {}
        if ids:
            for company in self.companies.find({"_id": {"$in": ids}}, {"name": 1}):
                names[company["_id"]] = company.get("name")
        out = []
        for doc in docs:
            item = serialize_doc(doc)
            item["company_name"] = names.get(doc.get("company"))
            out.append(item)
        return out

    def create(self, company_id: Any, data: dict) -> dict:
        now = _now()
        doc = {
            **data,
            "company": to_object_id(company_id),
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._attach_company_names([doc])[0]

    def get_by_id(self, opportunity_id: Any) -> Optional[dict]:
        oid = to_object_id(opportunity_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def list_all(self) -> List[dict]:
        return self._attach_company_names(list(self.collection.find()))

    def list_for_company(self, company_id: Any) -> List[dict]:
        docs = self.collection.find({"company": to_object_id(company_id)})
        return self._attach_company_names(list(docs))

    def update_owned(self, opportunity_id: Any, company_id: Any, fields: dict) -> Optional[dict]:
        """
        Update a posting owned by company_id. None when the posting does not
        exist or belongs to someone else; the two cases are not told apart.
        """
        oid = to_object_id(opportunity_id)
        if oid is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": oid, "company": to_object_id(company_id)},
            {"$set": {**fields, "updated_at": _now()}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        return self._attach_company_names([doc])[0]

    def delete_owned(self, opportunity_id: Any, company_id: Any) -> bool:
        oid = to_object_id(opportunity_id)
        if oid is None:
            return False
        doc = self.collection.find_one_and_delete(
            {"_id": oid, "company": to_object_id(company_id)}
        )
        return doc is not None


# ============================================================
# APPLICATIONS (ledger)
# ============================================================

class ApplicationService:
    """
    Records one application per (student, opportunity).

    The pre-check read gives the usual Conflict; the unique index from
    init_mongo_indexes() catches concurrent duplicates that slip past it.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])
        self.students: Collection = get_collection(COLLECTIONS["students"])
        self.companies: Collection = get_collection(COLLECTIONS["companies"])
        self.opportunities: Collection = get_collection(COLLECTIONS["opportunities"])

    def apply(
        self,
        student_id: Any,
        opportunity_id: Any,
        company_id: Optional[Any],
        position: str,
        additional_info: Optional[str] = None,
    ) -> dict:
        """
        Create an application.

        The student's current resume URL is copied onto the application;
        later resume uploads do not change it.

        Raises:
            NotFound: opportunity or student does not exist
            ValidationError: company_id is not the opportunity's owner
            Conflict: the student already applied to this opportunity
        """
        student_oid = to_object_id(student_id)
        opp_oid = to_object_id(opportunity_id)
        opportunity = self.opportunities.find_one({"_id": opp_oid}) if opp_oid else None
        student = self.students.find_one({"_id": student_oid}) if student_oid else None
        if not opportunity or not student:
            raise NotFound("Not found")

        owner = opportunity.get("company")
        if company_id and str(company_id) != str(owner):
            raise ValidationError("company_id does not match the opportunity")

        if self.collection.find_one({"student": student_oid, "opportunity_id": opp_oid}, {"_id": 1}):
            raise Conflict("Already applied to this opportunity")

        now = _now()
        doc = {
            "student": student_oid,
            "company": owner,
            "opportunity_id": opp_oid,
            "position": position,
            "resume_url": student.get("resume_url") or "",
            "additional_info": additional_info,
            "status": ApplicationStatus.pending.value,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("Already applied to this opportunity")
        doc["_id"] = result.inserted_id
        logger.info("Application %s: student %s -> opportunity %s", result.inserted_id, student_oid, opp_oid)
        return serialize_doc(doc)

    def list_for_student(self, student_id: Any) -> List[dict]:
        """Student's applications with company name and opportunity summary."""
        apps = list(self.collection.find({"student": to_object_id(student_id)}).sort("created_at", -1))

        company_ids = list({a["company"] for a in apps if a.get("company")})
        opp_ids = list({a["opportunity_id"] for a in apps if a.get("opportunity_id")})
        companies = {
            c["_id"]: c.get("name")
            for c in self.companies.find({"_id": {"$in": company_ids}}, {"name": 1})
        }
        opportunities = {
            o["_id"]: serialize_doc(o)
            for o in self.opportunities.find(
                {"_id": {"$in": opp_ids}}, {"title": 1, "role": 1, "package": 1}
            )
        }

        out = []
        for app_doc in apps:
            item = serialize_doc(app_doc)
            item["company_name"] = companies.get(app_doc.get("company"))
            item["opportunity"] = opportunities.get(app_doc.get("opportunity_id"))
            out.append(item)
        return out

    def list_for_company(self, company_id: Any) -> List[dict]:
        """Applications addressed to company_id, with the applicant profile."""
        apps = list(self.collection.find({"company": to_object_id(company_id)}).sort("created_at", -1))

        student_ids = list({a["student"] for a in apps})
        students = {
            s["_id"]: serialize_doc(s)
            for s in self.students.find({"_id": {"$in": student_ids}})
        }

        out = []
        for app_doc in apps:
            item = serialize_doc(app_doc)
            item["student_profile"] = students.get(app_doc["student"])
            out.append(item)
        return out
