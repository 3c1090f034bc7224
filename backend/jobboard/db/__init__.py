"""Database access: engine setup, connection gateway and statement builders."""
