from .user import User, UserRead, UserResponse, SignupRequest, LoginRequest, AuthResponse
from .goal import Goal, GoalDuration, GoalCreate, GoalProgressUpdate
