# rxguard/database.py
#
# This module is responsible for initializing the DynamoDB connection
# and creating the table resources the QR authorization flow reads from.

import os
import boto3

# --- DynamoDB Configuration ---
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
USERS_TABLE_NAME = os.getenv("USERS_TABLE_NAME", "Users")
APPOINTMENTS_TABLE_NAME = os.getenv("APPOINTMENTS_TABLE_NAME", "Appointments")
PRESCRIPTIONS_TABLE_NAME = os.getenv("PRESCRIPTIONS_TABLE_NAME", "Prescriptions")
PRESCRIPTION_MEDICATIONS_TABLE_NAME = os.getenv("PRESCRIPTION_MEDICATIONS_TABLE_NAME", "PrescriptionMedications")
AUDIT_LOGS_TABLE_NAME = os.getenv("AUDIT_LOGS_TABLE_NAME", "AuditLogs")

dynamodb = boto3.resource('dynamodb', region_name=AWS_REGION)
users_table = dynamodb.Table(USERS_TABLE_NAME)
appointments_table = dynamodb.Table(APPOINTMENTS_TABLE_NAME)
prescriptions_table = dynamodb.Table(PRESCRIPTIONS_TABLE_NAME)
prescription_medications_table = dynamodb.Table(PRESCRIPTION_MEDICATIONS_TABLE_NAME)
audit_logs_table = dynamodb.Table(AUDIT_LOGS_TABLE_NAME)
