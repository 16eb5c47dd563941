"""
Repository Interface Definitions

Defines the typed storage boundary for recruiter records. Pipeline stages
only talk to this interface, so schema drift and backend quirks stay
inside the implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Set


class RecruiterRepositoryInterface(ABC):
    """
    Abstract interface for the recruiters collection.

    Implementations:
    - AtlasRecruiterRepository: MongoDB (Atlas or self-hosted)

    Error contract:
    - StorageUnavailableError when the backend cannot be reached
    - DuplicateRecruiterError when a single insert hits the unique email index
    - BatchInsertError when a bulk insert fails for some or all documents
    - RepositoryError for any other backend failure
    """

    @abstractmethod
    def find_existing_emails(self, emails: Iterable[str]) -> Set[str]:
        """
        Return the subset of emails that already exist in storage.

        Args:
            emails: Normalized (lowercased) email addresses

        Returns:
            Set of normalized emails found
        """
        pass

    @abstractmethod
    def insert_recruiters(self, documents: List[Dict[str, Any]]) -> int:
        """
        Insert a chunk of recruiter documents in one call.

        Args:
            documents: Recruiter documents (see CandidateRecord.to_document)

        Returns:
            Number of documents inserted

        Raises:
            BatchInsertError: If any document was not written
            StorageUnavailableError: If the backend is unreachable
        """
        pass

    @abstractmethod
    def insert_recruiter(self, document: Dict[str, Any]) -> Optional[str]:
        """
        Insert a single recruiter document.

        Returns:
            The new document id as a string

        Raises:
            DuplicateRecruiterError: If the email already exists
            StorageUnavailableError: If the backend is unreachable
            RepositoryError: For any other failure
        """
        pass

    @abstractmethod
    def count_documents(self, filter: Dict[str, Any]) -> int:
        """
        Count recruiter documents matching the filter.
        """
        pass

    @abstractmethod
    def ensure_indexes(self) -> None:
        """
        Create the unique email index if it does not exist yet.

        Duplicate protection at insert time depends on this index.
        """
        pass
