from .api_client import ApiError, ContestHubClient
from .chat_state import ChatReadState
from .chat_poller import ChatPoller
