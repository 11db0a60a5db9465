from .auth import LazadaAuthClient, OAuthStateStore
from .client import LazadaClient
from .credential_store import Credential, CredentialStore
from .reconciler import Reconciler, SyncOutcome, SyncReport, get_last_report
from .results import RemoteBusinessError, RemoteResult, RemoteSuccess, RemoteTransportError
from .signer import sign
from .token_manager import TokenManager
