# rxguard/security.py
#
# This module resolves who is calling the API. Identity comes from the
# Cognito authorizer claims that API Gateway attaches to each request, and is
# mapped onto the internal user record and then onto an ActorContext.

from typing import Dict, Any, Optional

from boto3.dynamodb.conditions import Key
from fastapi import Depends, HTTPException, status, Request

from .database import users_table
from .models import ActorContext


def get_cognito_user_info(request: Request) -> Dict[str, Any]:
    """
    Dependency that extracts user claims from the Cognito authorizer context
    provided by API Gateway.
    """
    try:
        # Mangum places the raw Lambda event in the request scope
        claims = request.scope['aws.event']['requestContext']['authorizer']['claims']
    except KeyError:
        print("WARN: Cognito authorizer context not found. Expected only when running outside API Gateway.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials (Authorizer context missing)"
        )
    if not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User identifier missing from token")
    return claims


def db_get_user_by_cognito_sub(cognito_sub: str) -> Optional[Dict[str, Any]]:
    """Finds the internal user record for a Cognito Sub via the GSI."""
    print(f"DB Read: Searching for user with Cognito SUB: {cognito_sub} in GSI 'Index-cognitoSub'")
    response = users_table.query(
        IndexName='Index-cognitoSub',
        KeyConditionExpression=Key('cognitoSub').eq(cognito_sub)
    )
    items = response.get('Items', [])
    if items:
        return items[0]
    print(f"DB Read: User not found for Cognito SUB: {cognito_sub}")
    return None


def get_actor_context(cognito_claims: Dict[str, Any] = Depends(get_cognito_user_info)) -> Optional[ActorContext]:
    """
    Dependency returning the scanning user's ActorContext, or None when the
    claims do not map to a known user. The scan flow rejects None itself.
    """
    user_record = db_get_user_by_cognito_sub(cognito_claims.get("sub"))
    return ActorContext.from_session(user_record)
