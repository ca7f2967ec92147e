from typing import Optional
from fastapi import Depends, Header, HTTPException

# the auth gateway in front of this service resolves the login to an employee id
def get_current_employee_id(x_employee_id: Optional[int] = Header(None)) -> Optional[int]:
    return x_employee_id

def require_employee(employee_id: Optional[int] = Depends(get_current_employee_id)) -> int:
    if employee_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return employee_id
