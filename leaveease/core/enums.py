from enum import Enum


class Role(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"


class LeaveType(str, Enum):
    ANNUAL = "ANNUAL"
    SICK = "SICK"
    CASUAL = "CASUAL"


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Action(str, Enum):
    CREATE_LEAVE = "CREATE_LEAVE"
    LIST_OWN_LEAVES = "LIST_OWN_LEAVES"
    LIST_ALL_LEAVES = "LIST_ALL_LEAVES"
    DECIDE_LEAVE = "DECIDE_LEAVE"
    WHOAMI = "WHOAMI"
    ADMIN_PING = "ADMIN_PING"
