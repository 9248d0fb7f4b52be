"""
Helpcord - Discord help forum assistant and moderation bot

Core Components:

- **Help System**: Keeps exactly one category tag and one activity tag on every
  thread of the help forum, within Discord's limit of tags per thread
- **Activity Updates**: Periodically re-tags active help threads as unanswered,
  needing attention or active
- **Moderation Actions**: Warn, kick, mute, quarantine and ban with a direct
  message to the target, an audit trail and automatic lifting of temporary actions
- **Persistence**: SQLite storage of help threads and moderation actions
"""
