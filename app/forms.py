from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, SubmitField
from wtforms.validators import DataRequired, Email, Length, EqualTo, ValidationError

from app.theme import COLOR_PALETTES

class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message='Please enter your email'), Email(message='Please enter a valid email address')])
    password = PasswordField('Password', validators=[DataRequired(message='Please enter your password')])
    submit = SubmitField('Sign in')

class ProfileForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message='Please enter your name'), Length(max=120)])
    email = StringField('Email', validators=[DataRequired(message='Please enter your email'), Email(message='Please enter a valid email address')])
    submit = SubmitField('Save')

class PasswordChangeForm(FlaskForm):
    current_password = PasswordField('Current password', validators=[DataRequired(message='Please enter your current password')])
    new_password = PasswordField('New password', validators=[DataRequired(message='Please enter a new password'), Length(min=6, message='New password must be at least 6 characters long')])
    confirm_password = PasswordField('Confirm password', validators=[DataRequired(message='Please confirm the new password'), EqualTo('new_password', message='New passwords do not match')])
    submit = SubmitField('Change password')

    def validate_new_password(self, new_password):
        if new_password.data == self.current_password.data:
            raise ValidationError('New password must be different from current password')

class ThemeForm(FlaskForm):
    theme = SelectField('Theme', choices=[(p.value, p.name) for p in COLOR_PALETTES])
    submit = SubmitField('Apply')
